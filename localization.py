class Translator:
    def __init__(self) -> None:
        self.language = "en"
        self.translations = {
            "en": {},
            "zh-TW": {
                "Calendar": "日曆",
                "Log": "紀錄",
                "Stats": "統計",
                "AI Coach": "AI 教練",
                "Quick Start": "快速開始",
                "Log Today's Workout": "紀錄今日訓練",
                "Workout Log": "訓練紀錄",
                "No exercises yet, add one below.": "尚無訓練項目，請新增動作",
                "New Exercise": "新增動作",
                "Add Exercise": "新增動作",
                "Add Set": "新增組數",
                "Save": "儲存紀錄",
                "Saved!": "儲存成功！",
                "Copy": "複製",
                "Copy To": "複製到",
                "Copied!": "複製成功！",
                "Weight": "重量",
                "Reps": "次數",
                "Total Workout Days": "總訓練天數",
                "Sets This Week": "本週總組數",
                "Volume, Last 7 Days": "過去7天訓練量 (Volume)",
                "Get Advice": "取得建議",
                "Please configure an API key to use the AI coach.": "請先設定 API Key 以使用 AI 教練功能。",
                "Unable to generate advice, please try again later.": "無法產生建議，請稍後再試。",
                "AI connection error, please check your network or API key.": "AI 連線發生錯誤，請檢查網路或 API Key。",
            },
        }

    def set_language(self, lang: str) -> None:
        self.language = lang

    def gettext(self, key: str) -> str:
        return self.translations.get(self.language, {}).get(key, key)

translator = Translator()

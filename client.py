import requests
from typing import Optional


class FitTrackClient:
    """Simple REST client for the workout log API."""

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        self.base_url = base_url.rstrip("/")

    def get_log(self) -> dict:
        resp = requests.get(f"{self.base_url}/log")
        resp.raise_for_status()
        return resp.json()

    def get_day(self, date: str) -> list:
        resp = requests.get(f"{self.base_url}/log/{date}")
        resp.raise_for_status()
        return resp.json()

    def save_day(self, date: str, exercises: list[dict]) -> list:
        resp = requests.put(f"{self.base_url}/log/{date}", json=exercises)
        resp.raise_for_status()
        return resp.json()

    def copy_day(self, date: str, target: str) -> list:
        resp = requests.post(
            f"{self.base_url}/log/{date}/copy", params={"target": target}
        )
        resp.raise_for_status()
        return resp.json()

    def calendar(self, year: int, month: int) -> dict:
        resp = requests.get(f"{self.base_url}/calendar/{year}/{month}")
        resp.raise_for_status()
        return resp.json()

    def weekly_stats(self) -> list:
        resp = requests.get(f"{self.base_url}/stats/weekly")
        resp.raise_for_status()
        return resp.json()

    def overview(self) -> dict:
        resp = requests.get(f"{self.base_url}/stats/overview")
        resp.raise_for_status()
        return resp.json()

    def summary(self, max_days: int = 7) -> str:
        resp = requests.get(
            f"{self.base_url}/stats/summary", params={"max_days": max_days}
        )
        resp.raise_for_status()
        return resp.json()["summary"]

    def advice(self, date: Optional[str] = None) -> str:
        params = {"date": date} if date else {}
        resp = requests.post(f"{self.base_url}/advice", params=params)
        resp.raise_for_status()
        return resp.json()["advice"]

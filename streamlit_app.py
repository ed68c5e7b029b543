import asyncio
import datetime
import os

import altair as alt
import pandas as pd
import streamlit as st

from advice_service import AdviceService
from date_utils import date_key, parse_date_key, shift_month, today_key
from db import BlobRepository, SettingsRepository, WorkoutLogRepository
from localization import translator
from log_service import (
    WorkoutLogService,
    add_exercise,
    add_set,
    remove_exercise,
    remove_set,
    update_set,
)
from stats_service import StatisticsService

_ = translator.gettext

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class FitTrackApp:
    """Streamlit application for workout logging."""

    VIEWS = ["Calendar", "Log", "Stats"]

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        self.settings_repo = SettingsRepository(db_path, yaml_path)
        translator.set_language(self.settings_repo.get_text("language", "en"))
        self.weight_unit = self.settings_repo.get_text("weight_unit", "kg")
        self.logs = WorkoutLogRepository(BlobRepository(db_path))
        self.advisor = AdviceService.from_settings(self.settings_repo)
        self.service = WorkoutLogService(self.logs, self.advisor)
        self.stats = StatisticsService()
        self._configure_page()
        self._state_init()

    def _configure_page(self) -> None:
        if st.session_state.get("layout_set"):
            return
        st.set_page_config(page_title="FitTrack", layout="centered")
        st.session_state.layout_set = True

    def _state_init(self) -> None:
        today = datetime.date.today()
        if "view" not in st.session_state:
            st.session_state.view = "Calendar"
        if "selected_date" not in st.session_state:
            st.session_state.selected_date = today_key()
        if "calendar_month" not in st.session_state:
            st.session_state.calendar_month = (today.year, today.month)
        if "draft_date" not in st.session_state:
            st.session_state.draft_date = None
        if "draft" not in st.session_state:
            st.session_state.draft = []
        if "advice" not in st.session_state:
            st.session_state.advice = ""

    # callbacks

    def _select_date(self, key: str) -> None:
        st.session_state.selected_date = key
        st.session_state.view = "Log"

    def _change_view(self) -> None:
        if st.session_state.view == "Log":
            st.session_state.selected_date = today_key()

    def _shift_month(self, delta: int) -> None:
        year, month = st.session_state.calendar_month
        st.session_state.calendar_month = shift_month(year, month, delta)

    def _load_draft(self) -> None:
        selected = st.session_state.selected_date
        if st.session_state.draft_date != selected:
            st.session_state.draft = self.service.exercises_for(selected)
            st.session_state.draft_date = selected

    def _edit(self, fn, *args) -> None:
        st.session_state.draft = fn(st.session_state.draft, *args)

    def _add_exercise(self) -> None:
        self._edit(add_exercise, st.session_state.get("new_exercise_name", ""))
        st.session_state.new_exercise_name = ""

    def _update_set(self, index: int, set_index: int, field: str, widget: str) -> None:
        value = st.session_state[widget]
        if field == "reps":
            value = int(value)
        try:
            self._edit(update_set, index, set_index, field, value)
        except ValueError as e:
            st.session_state.error = str(e)

    def _save(self) -> None:
        self.service.save(st.session_state.selected_date, st.session_state.draft)
        st.session_state.flash = _("Saved!")

    def _copy(self) -> None:
        target = date_key(st.session_state.copy_target)
        self.service.copy(st.session_state.selected_date, target)
        st.session_state.selected_date = target
        st.session_state.draft_date = None
        st.session_state.view = "Log"
        st.session_state.flash = _("Copied!")

    def _request_advice(self) -> None:
        st.session_state.advice = asyncio.run(
            self.service.request_advice(st.session_state.selected_date)
        )

    # views

    def _coach_sidebar(self) -> None:
        with st.sidebar:
            st.header(_("AI Coach"))
            st.button(_("Get Advice"), key="get_advice", on_click=self._request_advice)
            if st.session_state.advice:
                for line in st.session_state.advice.split("\n"):
                    st.write(line)

    def _calendar_view(self) -> None:
        year, month = st.session_state.calendar_month
        cols = st.columns([1, 3, 1])
        cols[0].button("‹", key="prev_month", on_click=self._shift_month, args=(-1,))
        cols[1].subheader(f"{year}-{month:02d}")
        cols[2].button("›", key="next_month", on_click=self._shift_month, args=(1,))
        header = st.columns(7)
        for col, label in zip(header, WEEKDAY_LABELS):
            col.caption(label)
        cells = [None] * self.stats.leading_blank_days(year, month)
        cells += self.stats.month_calendar(self.logs.current, year, month)
        today = today_key()
        for start in range(0, len(cells), 7):
            row = st.columns(7)
            for col, cell in zip(row, cells[start : start + 7]):
                if cell is None:
                    continue
                label = str(cell["day"])
                if cell["has_workout"]:
                    label += " •"
                col.button(
                    label,
                    key=f"day_{cell['date']}",
                    type="primary" if cell["date"] == today else "secondary",
                    on_click=self._select_date,
                    args=(cell["date"],),
                )
        st.subheader(_("Quick Start"))
        label = _("Log Today's Workout")
        st.button(
            f"{label} ({today})",
            key="log_today",
            on_click=self._select_date,
            args=(today,),
        )

    def _set_row(self, index: int, set_index: int, ex_id: str, wset) -> None:
        cols = st.columns([1, 3, 3, 1])
        cols[0].write(f"{set_index + 1}")
        weight_key = f"weight_{ex_id}_{wset.id}"
        reps_key = f"reps_{ex_id}_{wset.id}"
        cols[1].number_input(
            f"{_('Weight')} ({self.weight_unit})",
            min_value=0.0,
            step=2.5,
            value=float(wset.weight),
            key=weight_key,
            on_change=self._update_set,
            args=(index, set_index, "weight", weight_key),
        )
        cols[2].number_input(
            _("Reps"),
            min_value=0,
            step=1,
            value=int(wset.reps),
            key=reps_key,
            on_change=self._update_set,
            args=(index, set_index, "reps", reps_key),
        )
        cols[3].button(
            "✕",
            key=f"rm_set_{ex_id}_{wset.id}",
            on_click=self._edit,
            args=(remove_set, index, set_index),
        )

    def _log_view(self) -> None:
        self._load_draft()
        selected = st.session_state.selected_date
        st.header(f"{selected} {_('Workout Log')}")
        draft = st.session_state.draft
        if not draft:
            st.info(_("No exercises yet, add one below."))
        for index, exercise in enumerate(draft):
            with st.container(border=True):
                cols = st.columns([4, 1])
                cols[0].subheader(exercise.name)
                cols[1].button(
                    "🗑",
                    key=f"rm_ex_{exercise.id}",
                    on_click=self._edit,
                    args=(remove_exercise, index),
                )
                for set_index, wset in enumerate(exercise.sets):
                    self._set_row(index, set_index, exercise.id, wset)
                st.button(
                    _("Add Set"),
                    key=f"add_set_{exercise.id}",
                    on_click=self._edit,
                    args=(add_set, index),
                )
        st.text_input(_("New Exercise"), key="new_exercise_name")
        st.button(_("Add Exercise"), key="add_exercise", on_click=self._add_exercise)
        st.button(_("Save"), key="save_log", type="primary", on_click=self._save)
        with st.expander(_("Copy")):
            st.date_input(
                _("Copy To"),
                value=parse_date_key(today_key()),
                key="copy_target",
            )
            st.button(_("Copy"), key="copy_log", on_click=self._copy)

    def _stats_view(self) -> None:
        log = self.logs.current
        cols = st.columns(2)
        cols[0].metric(_("Total Workout Days"), self.stats.total_workout_days(log))
        cols[1].metric(_("Sets This Week"), self.stats.weekly_total_sets(log))
        st.subheader(_("Volume, Last 7 Days"))
        df = pd.DataFrame(self.stats.weekly_stats(log))
        chart = (
            alt.Chart(df)
            .mark_bar()
            .encode(
                x=alt.X("label", sort=None, title=None),
                y=alt.Y("total_volume", title=f"Volume ({self.weight_unit})"),
                tooltip=["date", "total_sets", "total_volume"],
            )
        )
        st.altair_chart(chart, use_container_width=True)

    def run(self) -> None:
        st.title("FitTrack")
        self._coach_sidebar()
        flash = st.session_state.pop("flash", None)
        if flash:
            st.success(flash)
        error = st.session_state.pop("error", None)
        if error:
            st.error(error)
        view = st.radio(
            "View",
            self.VIEWS,
            key="view",
            format_func=_,
            horizontal=True,
            on_change=self._change_view,
        )
        if view == "Calendar":
            self._calendar_view()
        elif view == "Log":
            self._log_view()
        else:
            self._stats_view()


if __name__ == "__main__":
    db_path = os.environ.get("DB_PATH", "workout.db")
    yaml_path = os.environ.get("YAML_PATH", "settings.yaml")
    FitTrackApp(db_path=db_path, yaml_path=yaml_path).run()

"""
Tests for HabitStore (trackit/habits/store.py).

Covers habit CRUD, completion toggling, category lifecycle, settings
validation and the reset operations.
"""

from datetime import date

import pytest

from trackit.core.exceptions import DuplicateError, NotFoundError, ValidationError
from trackit.core.models import AppState, Habit
from trackit.habits.store import HabitStore

from tests.helpers import NOW


class TestHabits:
    def test_add_habit_assigns_id_and_created_at(self, store):
        habit = store.add_habit("  Read  ")

        assert habit.id == "id1"
        assert habit.name == "Read"
        assert habit.created_at == NOW.isoformat(timespec="seconds")
        assert habit.history == {}
        assert habit.track_days == [0, 1, 2, 3, 4, 5, 6]
        assert store.habits == [habit]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_add_habit_rejects_empty_name(self, store, name):
        with pytest.raises(ValidationError):
            store.add_habit(name)
        assert store.habits == []

    def test_add_habit_never_reuses_an_id(self):
        ids = iter(["dup", "dup", "fresh"])
        store = HabitStore(id_factory=lambda: next(ids))
        first = store.add_habit("One")
        second = store.add_habit("Two")
        assert (first.id, second.id) == ("dup", "fresh")

    def test_add_habit_with_category_and_days(self, store):
        habit = store.add_habit("Yoga", category="health", track_days=[5, 1, 1])
        assert habit.category == "health"
        assert habit.track_days == [1, 5]

    def test_add_habit_unknown_category(self, store):
        with pytest.raises(NotFoundError):
            store.add_habit("Yoga", category="nope")

    @pytest.mark.parametrize("days", [[], [7], [-1], ["1"], [True]])
    def test_add_habit_invalid_track_days(self, store, days):
        with pytest.raises(ValidationError):
            store.add_habit("Yoga", track_days=days)

    def test_rename(self, store):
        habit = store.add_habit("Run")
        store.rename_habit(habit.id, "Jog")
        assert store.get_habit(habit.id).name == "Jog"

    def test_rename_errors(self, store):
        habit = store.add_habit("Run")
        with pytest.raises(NotFoundError):
            store.rename_habit("missing", "Jog")
        with pytest.raises(ValidationError):
            store.rename_habit(habit.id, " ")
        assert habit.name == "Run"

    def test_delete_habit(self, store):
        keep = store.add_habit("Keep")
        gone = store.add_habit("Gone")
        store.delete_habit(gone.id)
        assert store.habits == [keep]
        with pytest.raises(NotFoundError):
            store.delete_habit(gone.id)

    def test_delete_all_habits_keeps_categories(self, store):
        store.add_habit("A")
        store.add_habit("B")
        store.record_achievement("streak-3")
        assert store.delete_all_habits() == 2
        assert store.habits == []
        assert len(store.categories) == 4
        assert store.state.achievements == ["streak-3"]

    def test_set_track_days_and_category(self, store):
        habit = store.add_habit("Run")
        store.set_track_days(habit.id, [1, 3])
        store.set_habit_category(habit.id, "learning")
        assert habit.track_days == [1, 3]
        assert habit.category == "learning"
        store.set_habit_category(habit.id, None)
        assert habit.category == ""


class TestCompletion:
    def test_set_completion_true_is_idempotent(self, store):
        habit = store.add_habit("Run")
        store.set_completion(habit.id, "2024-03-15", True)
        once = dict(habit.history)
        store.set_completion(habit.id, "2024-03-15", True)
        assert habit.history == once == {"2024-03-15": True}

    def test_unset_removes_key(self, store):
        habit = store.add_habit("Run")
        store.set_completion(habit.id, date(2024, 3, 15), True)
        store.set_completion(habit.id, date(2024, 3, 15), False)
        assert "2024-03-15" not in habit.history
        store.set_completion(habit.id, date(2024, 3, 15), False)
        assert habit.history == {}

    def test_toggle_returns_new_state(self, store):
        habit = store.add_habit("Run")
        assert store.toggle_completion(habit.id, "2024-03-15") is True
        assert store.toggle_completion(habit.id, "2024-03-15") is False
        assert habit.history == {}

    def test_completion_on_missing_habit(self, store):
        with pytest.raises(NotFoundError):
            store.set_completion("missing", "2024-03-15", True)
        with pytest.raises(NotFoundError):
            store.toggle_completion("missing", "2024-03-15")

    def test_reset_all_history(self, store):
        a = store.add_habit("A")
        b = store.add_habit("B")
        store.set_completion(a.id, "2024-03-14", True)
        store.set_completion(b.id, "2024-03-15", True)
        store.reset_all_history()
        assert [h.history for h in store.habits] == [{}, {}]
        assert [h.name for h in store.habits] == ["A", "B"]


class TestCategories:
    def test_add_category(self, store):
        category = store.add_category("Finance", "#00aa00")
        assert category.id == "cat-id1"
        assert store.get_category(category.id) is category

    def test_duplicate_name_is_case_insensitive(self, store):
        with pytest.raises(DuplicateError):
            store.add_category("HEALTH", "#123456")

    def test_duplicate_is_a_validation_error(self, store):
        with pytest.raises(ValidationError):
            store.add_category("health", "#123456")

    @pytest.mark.parametrize("color", ["red", "#12345", "123456", None])
    def test_invalid_color(self, store, color):
        with pytest.raises(ValidationError):
            store.add_category("Finance", color)

    def test_update_category(self, store):
        store.update_category("health", name="Fitness", color="#fff")
        category = store.get_category("health")
        assert (category.name, category.color) == ("Fitness", "#fff")

    def test_update_category_can_keep_own_name_in_other_case(self, store):
        store.update_category("health", name="HEALTH")
        assert store.get_category("health").name == "HEALTH"

    def test_update_category_rejects_other_names(self, store):
        with pytest.raises(DuplicateError):
            store.update_category("health", name="learning")

    def test_delete_category_clears_references(self, store):
        """Deleting a category referenced by two habits keeps both habits."""
        a = store.add_habit("A", category="health")
        b = store.add_habit("B", category="health")
        c = store.add_habit("C", category="learning")

        store.delete_category("health")

        assert [h.id for h in store.habits] == [a.id, b.id, c.id]
        assert a.category == "" and b.category == ""
        assert c.category == "learning"
        assert store.state.find_category("health") is None

    def test_delete_unreferenced_and_missing(self, store):
        store.delete_category("mindfulness")
        with pytest.raises(NotFoundError):
            store.delete_category("mindfulness")


class TestSettingsAndState:
    def test_update_settings_by_json_or_attr_name(self, store):
        settings = store.update_settings(weekStartsOn=1, show_reminders=True, reminderTime="07:45")
        assert settings.week_starts_on == 1
        assert settings.show_reminders is True
        assert settings.reminder_time == "07:45"

    @pytest.mark.parametrize("changes", [
        {"layout": "masonry"},
        {"weekStartsOn": 2},
        {"weekStartsOn": True},
        {"reminderTime": "25:00"},
        {"showAchievements": "yes"},
        {"fontSize": 12},
    ])
    def test_update_settings_rejects_bad_values(self, store, changes):
        with pytest.raises(ValidationError):
            store.update_settings(**changes)

    def test_update_settings_is_all_or_nothing(self, store):
        with pytest.raises(ValidationError):
            store.update_settings(layout="list", weekStartsOn=9)
        assert store.settings.layout == "grid"

    def test_theme(self, store):
        assert store.toggle_theme() == "dark"
        assert store.toggle_theme() == "light"
        with pytest.raises(ValidationError):
            store.set_theme("sepia")

    def test_record_achievement_is_append_only(self, store):
        assert store.record_achievement("streak-7") is True
        assert store.record_achievement("streak-7") is False
        assert store.state.achievements == ["streak-7"]

    def test_clear_all(self, store):
        store.add_habit("A")
        store.add_category("Finance", "#000")
        store.record_achievement("streak-3")
        store.set_theme("dark")
        store.clear_all()
        assert store.state == AppState.default()

    def test_replace_state(self, store):
        state = AppState(habits=[Habit(id="x", name="X", created_at="2024-01-01T00:00:00")])
        store.replace_state(state)
        assert store.get_habit("x").name == "X"


class TestDates:
    def test_invalid_date_is_a_validation_error(self, store):
        habit = store.add_habit("Run")
        with pytest.raises(ValidationError):
            store.set_completion(habit.id, "15/03/2024", True)
        with pytest.raises(ValidationError):
            store.toggle_completion(habit.id, "yesterday")
        assert habit.history == {}

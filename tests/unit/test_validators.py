"""Unit tests for domain model validators."""

import datetime as dt

import pytest
from pydantic import ValidationError

from src.domain.create_models import TaskCreate
from src.domain.task import TaskCategory
from src.domain.update_models import TaskUpdate


class TestTaskCreateValidators:
    """Tests for TaskCreate field validation."""

    def test_title_is_trimmed(self):
        """Test that surrounding whitespace is stripped."""
        task = TaskCreate(title="  Read a chapter  ", date=dt.date(2024, 5, 1))

        assert task.title == "Read a chapter"

    def test_title_accepts_unicode(self):
        """Test that non-ASCII titles are accepted."""
        task = TaskCreate(title="Lire 📚", date=dt.date(2024, 5, 1))

        assert task.title == "Lire 📚"

    def test_blank_title_rejected(self):
        """Test that whitespace-only titles are rejected."""
        with pytest.raises(ValidationError, match="Title cannot be empty"):
            TaskCreate(title="   ", date=dt.date(2024, 5, 1))

    def test_long_title_rejected(self):
        """Test that overly long titles are rejected."""
        with pytest.raises(ValidationError, match="Title too long"):
            TaskCreate(title="x" * 201, date=dt.date(2024, 5, 1))

    def test_defaults(self):
        """Test category and estimate defaults."""
        task = TaskCreate(title="Read", date=dt.date(2024, 5, 1))

        assert task.category == TaskCategory.GENERAL
        assert task.estimated_time == 25
        assert task.elapsed_time == 0

    @pytest.mark.parametrize("minutes", [0, 481])
    def test_estimate_out_of_range_rejected(self, minutes):
        """Test the 1..480 minute bounds."""
        with pytest.raises(ValidationError):
            TaskCreate(title="Read", date=dt.date(2024, 5, 1), estimated_time=minutes)

    def test_unknown_category_rejected(self):
        """Test that categories outside the fixed set are rejected."""
        with pytest.raises(ValidationError):
            TaskCreate(title="Read", date=dt.date(2024, 5, 1), category="doodles")

    def test_camel_case_input(self):
        """Test that the wire format populates snake_case fields."""
        task = TaskCreate.model_validate({"title": "Read", "date": "2024-05-01", "estimatedTime": 10})

        assert task.estimated_time == 10


class TestTaskUpdateValidators:
    """Tests for TaskUpdate field validation."""

    @pytest.mark.parametrize(("raw", "clamped"), [(-5, 0), (50, 50), (150, 100)])
    def test_progress_is_clamped(self, raw, clamped):
        """Test that progress is clamped into 0..100."""
        assert TaskUpdate(progress=raw).progress == clamped

    def test_unset_fields_are_not_dumped(self):
        """Test that a partial update only carries the fields provided."""
        changes = TaskUpdate(progress=10)

        assert changes.model_dump(exclude_unset=True) == {"progress": 10}

    def test_blank_title_rejected(self):
        """Test that a blank replacement title is rejected."""
        with pytest.raises(ValidationError):
            TaskUpdate(title=" ")

import pytest

from analytics.frames import compose_frame, compose_frames, summarize
from core.models import ChartFrame, Granularity
from normalize import normalize_snapshot


def test_compose_frames_aligned(expense_records, income_records, now):
    frames = compose_frames(
        normalize_snapshot(expense_records, now),
        normalize_snapshot(income_records, now, income=True),
        now,
    )
    assert list(frames) == list(Granularity)
    for g, frame in frames.items():
        assert frame.granularity is g
        assert len(frame.labels) == len(frame.expenses) == len(frame.income)
    monthly = frames[Granularity.MONTHLY]
    assert monthly.labels == ("Jan", "Feb", "Mar", "Apr", "May", "Jun")
    assert monthly.income == (0, 0, 0, 0, 0, 2900)
    assert monthly.rows()[-1] == ("Jun", 44.5, 2900)


def test_compose_frame_weekly_labels(now):
    frame = compose_frame(Granularity.WEEKLY, [1, 2, 3, 4], [0, 0, 0, 5], now)
    assert frame.to_dict() == {
        "labels": ["4 weeks ago", "3 weeks ago", "2 weeks ago", "This week"],
        "expenses": [1, 2, 3, 4],
        "income": [0, 0, 0, 5],
    }


def test_misaligned_frame_rejected(now):
    with pytest.raises(ValueError):
        compose_frame(Granularity.YEARLY, [1, 2, 3], [0, 0, 0, 0], now)
    with pytest.raises(ValueError):
        ChartFrame(Granularity.DAILY, ("a",), (1.0,), ())


def test_summary_is_most_recent_slot(now):
    frame = compose_frame(Granularity.DAILY, [1, 2, 3, 4, 5, 6, 7], [0, 0, 0, 0, 0, 0, 70], now)
    s = summarize(frame)
    assert (s.display, s.expenses, s.income) == ("Today", 7, 70)

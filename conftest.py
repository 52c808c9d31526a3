"""Shared fixtures for KeyCalc tests."""
from datetime import datetime, timedelta

import pytest

from calculator import Calculator
from history_manager import HistoryManager


class MemoryStore:
    """In-memory stand-in for the SQLite blob store."""

    def __init__(self, blob=None):
        self.blob = blob
        self.saves = 0

    def load_history_blob(self):
        return self.blob

    def save_history_blob(self, data):
        self.blob = data
        self.saves += 1


class StepClock:
    """Returns a timestamp one second later on every call."""

    def __init__(self, start=datetime(2026, 1, 1, 12, 0, 0)):
        self.start = start
        self.ticks = 0

    def __call__(self):
        self.ticks += 1
        return self.start + timedelta(seconds=self.ticks)


def press(calc, *keys):
    state = None
    for key in keys:
        state = calc.handle(key)
    return state


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def history(store, clock):
    return HistoryManager(store, clock=clock)


@pytest.fixture
def calc(history):
    return Calculator(history=history, angle_mode="deg")

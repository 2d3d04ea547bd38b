# -*- coding: utf-8 -*-
"""Shared fixtures for the memorial wizard tests."""

import os

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from services.mock_draft_store import MockDraftStore

from tests.doubles import (
    OWNER_ID, FakeTimer, ImmediateTaskRunner, ManualTaskRunner, RecordingStore, ScriptedPrompts,
)


@pytest.fixture
def mock_store():
    return MockDraftStore(owner_id=OWNER_ID)


@pytest.fixture
def store(mock_store):
    return RecordingStore(mock_store)


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def runner(qapp):
    return ImmediateTaskRunner()


@pytest.fixture
def manual_runner(qapp):
    return ManualTaskRunner()


@pytest.fixture
def prompts():
    return ScriptedPrompts()

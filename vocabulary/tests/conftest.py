# vocabulary/tests/conftest.py
import random

import pytest
from rest_framework.test import APIClient

from vocabulary.storage import DatabaseStore, LocalStore


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="alice", password="pw-alice")


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="bob", password="pw-bob")


@pytest.fixture
def db_store(user):
    return DatabaseStore(user)


@pytest.fixture
def local_store():
    return LocalStore()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c

import pytest
from django.core.cache import cache

from apps.relay import gateway


@pytest.fixture(autouse=True)
def _clear_ratelimit_cache():
    # Rate limit counters live in the local-memory cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def owner_a(django_user_model):
    return django_user_model.objects.create_user(username="alice", password="secret123")


@pytest.fixture
def owner_b(django_user_model):
    return django_user_model.objects.create_user(username="bob", password="secret123")


@pytest.fixture
def client_a(client, owner_a):
    client.force_login(owner_a)
    return client


@pytest.fixture
def garage(owner_a):
    return gateway.register_device(
        owner_a,
        "garage-01",
        name="Garage door",
        place="Home",
        lat="44.8",
        lng="20.4",
    )

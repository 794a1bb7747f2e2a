import pytest

from hypergres.models import Relationship, Source


@pytest.fixture()
def test_source():
    return Source(name="test", identifying_properties=("id",))


@pytest.fixture()
def users():
    return Source(
        name="users",
        identifying_properties=("id",),
        has=(Relationship("tasks", "id", "owner"),),
    )


@pytest.fixture()
def tasks():
    return Source(
        name="tasks",
        identifying_properties=("id",),
        belongs_to=(Relationship("users", "owner", "id"),),
    )

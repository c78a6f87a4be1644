import pytest
from app import create_app
from app.extensions import db as _db, editors
from app.variants.manager import VariantManager
from app.variants.options import Option


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture
def client(app):
    editors.clear()
    return app.test_client()


@pytest.fixture
def db(app):
    """Per-test database session with rollback."""
    with app.app_context():
        _db.session.begin_nested()
        yield _db
        _db.session.rollback()


@pytest.fixture
def saved_option():
    """Factory for saved (non-editing) options."""
    counter = iter(range(1000))

    def make(name, values):
        return Option(id=f"opt-{next(counter)}", name=name, values=list(values), editing=False)

    return make


@pytest.fixture
def manager_events():
    return {"variants": [], "editing": []}


@pytest.fixture
def manager(manager_events):
    return VariantManager(
        on_variants_change=manager_events["variants"].append,
        on_editing_state_change=lambda *args: manager_events["editing"].append(args),
    )


def add_saved_option(manager, name, values):
    """Drive the editor the way a merchant would: add, type, Done."""
    option = manager.add_option()
    assert option is not None
    manager.rename_option(option.id, name)
    for index, value in enumerate(values):
        manager.set_value(option.id, index, value)
    assert manager.commit_option(option.id)
    return option


@pytest.fixture
def add_option():
    return add_saved_option

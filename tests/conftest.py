"""
Pytest configuration and fixtures for select tree tests.

Provides a Flask application with an in memory database, Babel,
and a small category tree::

    Electronics (1)
        Phones (3)
            Smartphones (5)
        Laptops (4)
    Books (2)
        Fiction (6)
    Lost (7) -> parent 99, orphaned
"""

import pytest
from flask import Flask
from flask_babel import Babel

from flask_selecttree import SQLATreeInterface
from tests.models import Category, Product, db


CATEGORIES = [
    (1, "Electronics", None),
    (2, "Books", None),
    (3, "Phones", 1),
    (4, "Laptops", 1),
    (5, "Smartphones", 3),
    (6, "Fiction", 2),
    (7, "Lost", 99),
]


@pytest.fixture
def app():
    """Create Flask application for testing."""
    app = Flask(__name__)
    app.config.update({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key-for-select-tree',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })
    Babel(app)
    db.init_app(app)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def categories(app):
    """Insert the category tree, returns rows by id."""
    rows = {}
    for _id, name, parent_id in CATEGORIES:
        rows[_id] = Category(id=_id, name=name, parent_id=parent_id)
        db.session.add(rows[_id])
    db.session.commit()
    return rows


@pytest.fixture
def product(categories):
    """Product related to Laptops and Fiction."""
    item = Product(
        id=1,
        name="Notebook",
        categories=[categories[4], categories[6]],
        main_category=categories[4],
    )
    db.session.add(item)
    db.session.commit()
    return item


@pytest.fixture
def many_datamodel(app):
    return SQLATreeInterface(Product, "categories", db.session)


@pytest.fixture
def single_datamodel(app):
    return SQLATreeInterface(Product, "main_category", db.session)

import pytest

from circulation.library import Library

@pytest.fixture
def lib():
    # Fresh empty library for each test
    return Library()

@pytest.fixture
def stocked_lib(lib):
    lib.add_book(1, "Dune", 2)
    lib.add_book(2, "Emma", 1)
    lib.create_account(10, "Ada")
    lib.create_account(11, "Grace")
    return lib

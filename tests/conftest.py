# tests/conftest.py
import logging

import numpy as np
import pytest

from neurorbm.models import RestrictedBoltzmannMachine


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def zero_rbm():
    """RBM binaria/binaria 4x2 con W, b y c en cero."""
    rbm = RestrictedBoltzmannMachine.from_params(n_visible=4, n_hidden=2, seed=0)
    rbm.W[...] = 0.0
    return rbm


@pytest.fixture(autouse=True)
def _reset_neurorbm_logger():
    # setup_logging() desactiva la propagación; caplog necesita que llegue a root
    yield
    lg = logging.getLogger("neurorbm")
    lg.handlers.clear()
    lg.propagate = True
    lg.setLevel(logging.NOTSET)

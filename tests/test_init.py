import pytest


def test_lazy_imports_and_caching():
    import commiter  # triggers commiter.__getattr__

    engine_cls = commiter.CommitMessageEngine
    from commiter.commit import CommitMessageEngine

    assert engine_cls is CommitMessageEngine
    assert commiter.CommitMessageEngine is CommitMessageEngine


def test_unknown_attribute_raises():
    import commiter

    with pytest.raises(AttributeError):
        getattr(commiter, "TotallyUnknownSymbol")

from commiter.exceptions import CommiterError, ConfigError, GitError, LLMError


def test_exceptions_hierarchy_and_str():
    # Given exception classes
    # When instantiating
    base = CommiterError("base")
    g = GitError("git")
    llm_err = LLMError("llm")
    c = ConfigError("cfg")

    # Then hierarchy holds
    assert isinstance(base, Exception)
    assert isinstance(g, CommiterError)
    assert isinstance(llm_err, CommiterError)
    assert isinstance(c, CommiterError)
    # And messages are retained
    assert "git" in str(g)
    assert "llm" in str(llm_err)
    assert "cfg" in str(c)

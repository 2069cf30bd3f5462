import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]

TEST_LAYERS = ["domain", "application", "integration", "bdd"]

# psycopg2 is compiled per interpreter; a cached wheel may not match.
_C_EXT_PACKAGES = ["psycopg2"]


def _install(session: nox.Session, postgresql: bool = False) -> None:
    """Install takeaway and its test group; add the PostgreSQL driver on request."""
    extras = ["--extras", "postgresql"] if postgresql else []
    session.run("poetry", "install", "--with", "test", *extras, external=True)
    if postgresql:
        session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the whole suite; installs every extra so the package imports cleanly everywhere."""
    _install(session, postgresql=True)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
@nox.parametrize("layer", TEST_LAYERS)
def tests_layer(session: nox.Session, layer: str) -> None:
    """Run one test layer, e.g. ``nox -s "tests_layer(layer='domain')"``."""
    _install(session)
    session.run("pytest", f"tests/takeaway/{layer}/", *session.posargs)


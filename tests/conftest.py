import asyncio
import inspect

import pytest


def pytest_addoption(parser):
    # pyproject sets asyncio_mode; declare it so plain pytest does not warn
    parser.addini("asyncio_mode", "asyncio test mode (pytest-asyncio)", default="auto")


def _asyncio_plugin_loaded(config) -> bool:
    manager = config.pluginmanager
    return manager.hasplugin("pytest_asyncio") or manager.hasplugin("asyncio")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Dispatcher, player and notifier tests are coroutines; run them without pytest-asyncio too."""
    if _asyncio_plugin_loaded(pyfuncitem.config):
        return None
    if not inspect.iscoroutinefunction(pyfuncitem.obj):
        return None

    kwargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
    asyncio.run(pyfuncitem.obj(**kwargs))
    return True

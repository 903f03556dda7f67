"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # URLs, dataset constants, schema
    └── {feature}.py      # Fetch / parse functions

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above. See ``edi/``.

2. Download with the shared session (or reuse ``edi.transfer.fetch``)::

       from urchin_timeseries.services.http import session

       def fetch_something(url: str) -> bytes:
           resp = session.get(url)
           resp.raise_for_status()
           return resp.content

3. Raise errors from ``urchin_timeseries.exceptions`` so the CLI reports them.

4. Re-export public API in ``__init__.py`` with ``__all__`` and wire it into
   ``flows/plot.py`` as a ``@task``.

5. Add tests in ``tests/test_{name}.py``.
"""

"""payables-splitter: split the legacy payables workbook into P1 and P2 workbooks.

The package reads a single ``.xls`` payables export, partitions the
``Invoices`` sheet by whether ``IDINVC`` is made only of digits, carries the
partition over to ``Invoice_Details`` through ``CNTITEM``, and writes two
workbooks that keep every other sheet unchanged.

Architecture
------------
* ``splitter``: header resolution, the identifier predicate, and the join filter.
* ``workbook``: xlrd source loading and xlwt assembly with a per-output style cache.
* ``writer``: bounded retry policy and the delete-then-write workbook saver.

Configuration
-------------
Sheet/column names, output naming and retry settings live in
``config/config.json``. Paths default to the ``data/`` and ``logs/`` trees but
respect ``DATA_DIR``, ``LOGS_DIR``, ``PAYABLES_SOURCE_PATH`` and
``PAYABLES_DEST_DIR`` overrides.

Examples
--------
Split the configured source into the configured destination folder:

    >>> python -m payables_splitter.main_split

Values only, custom paths:

    >>> python -m payables_splitter.main_split --source in.xls --dest-dir out --no-formatting
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

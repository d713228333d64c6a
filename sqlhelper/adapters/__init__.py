"""Driver adapters.

``sqlhelper.adapters.sqlite`` uses the standard library. ``sqlhelper.adapters.pymysql``
needs the ``pymysql`` extra and is imported on demand.
"""

"""SITESYNC test suite.

Folder taxonomy
- unit/         : single functions and classes, no real I/O.
- contract/     : port behavior checked against every adapter (memory, SQLite).
- integration/  : unit of work, migrations and command flows over a real SQLite file.
- functional/   : CLI workflows asserted on user-visible output.
- e2e/          : top-level CLI options (logging, flight recorder, help).
- fixtures/     : shared fixture plugins (no tests here).

Property-based tests live beside the layer they exercise and carry
``@pytest.mark.property``.
"""

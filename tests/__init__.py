"""GERBIL test suite.

Folder taxonomy
- unit/      : Isolated, fast checks of a single module/class/function.
- e2e/       : The `gerbil` command line driven through Click's CliRunner.
- fixtures/  : Shared fixtures and builders (no tests here).

General guidance
- Drive scenarios through a recording report logger rather than the console.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""

"""Lint a document with mistakes and print the diagnostics."""

from cni_format import Linter, Severity

SOURCE = """\
[server
host = example.org
motd = `Welcome
port = 8080
"""

for diagnostic in Linter(SOURCE).diagnostics():
    marker = "!" if diagnostic.severity is Severity.SYNTAX_ERROR else "-"
    print(marker, diagnostic)

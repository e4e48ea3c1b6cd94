"""PySide6 front end for the Mantis engine."""

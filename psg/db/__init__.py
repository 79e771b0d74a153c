"""Persistence: psg tables, record store and Moodle SQL collaborators."""

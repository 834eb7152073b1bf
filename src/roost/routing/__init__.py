"""Routing — ordered regex route table with capture-group templating.

Route definitions are tried in the order they were declared; the first
match wins.
"""

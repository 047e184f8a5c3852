"""
Runtime support: the lexer and parser drivers running on generated
tables.
"""

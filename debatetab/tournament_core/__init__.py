"""
Pure Python pairing and standings engine.

Nothing in this package touches the database; debatetab.tournament converts
stored rows into these structures and persists what the engine produces.
"""

# uparse/engine/combinators/__init__.py
"""Built-in combinator catalog (see ``uparse.engine.registry``)."""

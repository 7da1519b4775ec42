"""
Declared content types.

Every module in this package is imported at startup; each
``ContentTypeDeclaration`` subclass with a slug becomes a content type.
"""

from notenest.models.note import Identity, Note

__all__ = ["Identity", "Note"]

from offset_finder.sources.json_file import JsonSchemaSource

__all__ = ["JsonSchemaSource"]

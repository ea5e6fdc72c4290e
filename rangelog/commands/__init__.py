"""Click commands for the rangelog CLI."""

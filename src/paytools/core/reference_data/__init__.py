"""HMRC reference data: schema, loading, validation and the temporal store."""

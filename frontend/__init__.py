"""Console client for the FlowPartner API (hash-path router + text views)."""

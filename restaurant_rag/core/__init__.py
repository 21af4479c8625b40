"""Pure domain logic: chunking, rank fusion, dual retrieval and the error hierarchy."""

"""Environment construction (materializer) and inspection (scanner)."""

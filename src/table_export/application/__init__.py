"""Application layer – pagination primitives and the export pipeline."""

"""Higher-level services that coordinate a benchmark run."""

from .benchmark import WorkflowBenchmark, log_summary

__all__ = ["WorkflowBenchmark", "log_summary"]

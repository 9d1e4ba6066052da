"""Merge engine for layered configuration."""

from confnode.merge.merger import merge, merge_all


__all__ = ["merge", "merge_all"]

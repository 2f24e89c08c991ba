"""
Unit tests for the llm_samplers package.

This package contains tests for the logits buffer, the samplers, option
metadata, sampler chains, configuration loading and the command-line tool.
"""

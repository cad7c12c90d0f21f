"""Utilities (logging, retry, exclusion patterns, reporting)"""

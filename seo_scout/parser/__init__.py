"""Parsers for HTML pages, sitemaps and robots.txt."""

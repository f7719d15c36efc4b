"""Crawl orchestration: frontier, scheduler, controller and HTTP collaborators."""

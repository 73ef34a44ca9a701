"""learnhub: course catalog, enrollment and review API."""

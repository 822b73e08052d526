"""Contact app package: messages sent through the website contact form."""

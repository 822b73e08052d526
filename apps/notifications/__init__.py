"""Notifications app package.

Sends booking confirmation, cancellation and new-booking e-mails. Every
message goes out through a Celery task so the request that triggered it
never waits on the mail server.
"""

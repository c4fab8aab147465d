"""Outbound paths: backend form submission and the event request mailer."""

"""Leave / work-from-home portal package.

Organized by feature modules (scheduling, users, requests, reports) with a thin
Flask controller layer on top of service/repository layers.
"""

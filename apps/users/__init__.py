"""Users app package.

Guesthouse staff are plain ``django.contrib.auth`` users with
``is_staff`` set. This app provides the session login used by the admin
API and the permission classes that guard it.
"""

"""Users app package.

Custom email-login user with the platform roles (client, company, hotel
administrator, central administrator). Use ``apps.users.models.CustomUser``
as the AUTH_USER_MODEL throughout the project.
"""

"""
Service layer abstraction.

The service layer owns the authorization pipeline shared by every
handler (``pipeline``), the tagged results it produces (``outcomes``)
and the handler flows themselves (``service_admin_service``).  API
routers only translate HTTP requests into calls on these objects.
"""

"""Admin panel: auth, guards, middleware, views and routers"""

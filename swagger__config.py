"""
Swagger/OpenAPI configuration for SnipRewards API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "SnipRewards API",
        "description": "Salon loyalty API: salon registration, QR check-in, visits and loyalty cards",
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": 'JWT Authorization header using the Bearer scheme. Example: "Authorization: Bearer {token}"',
        }
    },
    "security": [{"Bearer": []}],
    "tags": [
        {"name": "Authentication", "description": "Signup, login and current profile"},
        {"name": "Salons", "description": "Salon profile and QR code management"},
        {"name": "Check-in", "description": "QR scan resolution and visit recording"},
        {"name": "Loyalty", "description": "Customer loyalty cards and visit history"},
        {"name": "Dashboard", "description": "Salon owner statistics"},
        {"name": "Utility", "description": "Health checks"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "error"},
                "code": {"type": "string", "example": "UNKNOWN_SALON"},
                "message": {"type": "string"},
                "details": {"type": "object"},
            },
        },
        "Success": {
            "type": "object",
            "properties": {
                "status": {"type": "string", "example": "success"},
                "message": {"type": "string"},
            },
        },
        "Profile": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "email": {"type": "string"},
                "full_name": {"type": "string"},
                "phone": {"type": "string"},
                "role": {
                    "type": "string",
                    "enum": ["salon_owner", "barber", "customer"],
                },
                "created_at": {"type": "string", "format": "date-time"},
                "updated_at": {"type": "string", "format": "date-time"},
            },
        },
        "Salon": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "address": {"type": "string"},
                "phone": {"type": "string"},
                "owner_id": {"type": "string"},
                "qr_code": {"type": "string"},
                "loyalty_threshold": {"type": "integer", "example": 10},
                "reward_description": {
                    "type": "string",
                    "example": "Free haircut after 10 visits",
                },
                "created_at": {"type": "string", "format": "date-time"},
                "updated_at": {"type": "string", "format": "date-time"},
            },
        },
        "Visit": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "customer_id": {"type": "string"},
                "salon_id": {"type": "string"},
                "barber_id": {"type": "string"},
                "service_type": {"type": "string", "example": "Haircut"},
                "amount": {"type": "string", "example": "25.00"},
                "points_earned": {"type": "integer", "example": 25},
                "visit_date": {"type": "string", "format": "date-time"},
                "created_at": {"type": "string", "format": "date-time"},
            },
        },
        "LoyaltyCard": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "customer_id": {"type": "string"},
                "salon_id": {"type": "string"},
                "total_visits": {"type": "integer"},
                "total_points": {"type": "integer"},
                "rewards_redeemed": {"type": "integer"},
                "created_at": {"type": "string", "format": "date-time"},
                "updated_at": {"type": "string", "format": "date-time"},
            },
        },
    },
}

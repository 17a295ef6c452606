"""Default rule catalog loaded by ``manage.py seed_vastu_rules``."""

DEFAULT_RULES = [
    {
        "name": "Main Door Direction",
        "category": "entrance",
        "description": "The main door should face north, east, or northeast for positive energy flow.",
        "detailed_explanation": (
            "The main entrance is considered the mouth of the house. It should be "
            "in the north, east, or northeast direction to allow positive energy to enter."
        ),
        "direction": "north",
        "room_type": "entrance",
        "element": "air",
        "importance": "critical",
        "impact": "positive",
        "benefits": ["Positive energy flow", "Good fortune", "Harmony in family"],
        "consequences": ["Negative energy", "Financial problems", "Health issues"],
        "remedies": [
            {
                "type": "placement",
                "description": "Ensure main door faces north, east, or northeast",
                "cost": "high",
                "difficulty": "hard",
                "time_required": "Construction work required",
            }
        ],
        "tags": ["entrance", "main-door", "energy-flow"],
    },
    {
        "name": "Kitchen Placement",
        "category": "kitchen",
        "description": "Kitchen should be in the southeast corner of the house.",
        "detailed_explanation": (
            "The kitchen represents the fire element and should be placed in the "
            "southeast direction, which is ruled by Agni."
        ),
        "direction": "southeast",
        "room_type": "kitchen",
        "element": "fire",
        "importance": "high",
        "impact": "positive",
        "benefits": ["Good health", "Harmony in family", "Proper digestion"],
        "consequences": ["Health problems", "Family disputes", "Financial issues"],
        "remedies": [
            {
                "type": "placement",
                "description": "Move kitchen to southeast corner",
                "cost": "high",
                "difficulty": "hard",
                "time_required": "Major renovation required",
            },
            {
                "type": "color",
                "description": "Use red, orange, or yellow colors in kitchen",
                "cost": "low",
                "difficulty": "easy",
                "time_required": "1-2 days",
            },
        ],
        "tags": ["kitchen", "fire-element", "southeast"],
    },
    {
        "name": "Bedroom Direction",
        "category": "bedroom",
        "description": "Master bedroom should be in the southwest corner.",
        "detailed_explanation": (
            "The master bedroom should be in the southwest direction as it "
            "represents stability and relationships."
        ),
        "direction": "southwest",
        "room_type": "bedroom",
        "element": "earth",
        "importance": "high",
        "impact": "positive",
        "benefits": ["Stable relationships", "Good health", "Peaceful sleep"],
        "consequences": ["Relationship problems", "Sleep issues", "Health problems"],
        "remedies": [
            {
                "type": "placement",
                "description": "Move master bedroom to southwest",
                "cost": "high",
                "difficulty": "hard",
                "time_required": "Major renovation required",
            },
            {
                "type": "color",
                "description": "Use earth colors like brown, beige, or yellow",
                "cost": "low",
                "difficulty": "easy",
                "time_required": "1-2 days",
            },
        ],
        "tags": ["bedroom", "master-bedroom", "southwest", "earth-element"],
    },
    {
        "name": "Bathroom Placement",
        "category": "bathroom",
        "description": "Bathroom should not be in the northeast corner.",
        "detailed_explanation": (
            "The northeast corner is considered sacred and should not have a "
            "bathroom as it can cause negative energy."
        ),
        "direction": "northeast",
        "room_type": "bathroom",
        "element": "water",
        "importance": "critical",
        "impact": "negative",
        "benefits": [],
        "consequences": ["Financial problems", "Health issues", "Spiritual problems"],
        "remedies": [
            {
                "type": "placement",
                "description": "Move bathroom away from northeast corner",
                "cost": "high",
                "difficulty": "hard",
                "time_required": "Major renovation required",
            },
            {
                "type": "decoration",
                "description": "Use white or light blue colors to minimize negative effects",
                "cost": "low",
                "difficulty": "easy",
                "time_required": "1 day",
            },
        ],
        "tags": ["bathroom", "northeast", "water-element", "sacred-corner"],
    },
    {
        "name": "Puja Room Location",
        "category": "puja-room",
        "description": "Puja room should be in the northeast corner.",
        "detailed_explanation": (
            "The northeast corner is considered the most sacred direction and is "
            "ideal for prayer and meditation."
        ),
        "direction": "northeast",
        "room_type": "puja-room",
        "element": "water",
        "importance": "high",
        "impact": "positive",
        "benefits": ["Spiritual growth", "Peace of mind", "Positive energy"],
        "consequences": ["Spiritual problems", "Lack of peace", "Negative energy"],
        "remedies": [
            {
                "type": "placement",
                "description": "Create puja room in northeast corner",
                "cost": "medium",
                "difficulty": "medium",
                "time_required": "1-2 weeks",
            },
            {
                "type": "decoration",
                "description": "Keep the area clean and use white or light colors",
                "cost": "low",
                "difficulty": "easy",
                "time_required": "1 day",
            },
        ],
        "tags": ["puja-room", "northeast", "sacred", "spiritual"],
    },
]

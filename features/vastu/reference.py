"""Static Vastu reference data served by the catalog endpoints."""

FIVE_ELEMENTS = [
    {
        "name": "Earth",
        "color": "Brown/Yellow",
        "direction": "Southwest",
        "characteristics": ["Stability", "Foundation", "Grounding"],
        "rooms": ["Bedroom", "Study", "Storage"],
        "materials": ["Clay", "Stone", "Ceramic", "Wood"],
        "colors": ["Brown", "Yellow", "Orange", "Beige"],
        "remedies": ["Add earth elements", "Use brown colors", "Place heavy furniture"],
    },
    {
        "name": "Water",
        "color": "Blue/Black",
        "direction": "Northeast",
        "characteristics": ["Fluidity", "Flow", "Purity"],
        "rooms": ["Bathroom", "Kitchen", "Puja Room"],
        "materials": ["Glass", "Mirror", "Crystal", "Metal"],
        "colors": ["Blue", "Black", "Dark Blue", "Navy"],
        "remedies": ["Add water features", "Use blue colors", "Place mirrors"],
    },
    {
        "name": "Fire",
        "color": "Red/Orange",
        "direction": "Southeast",
        "characteristics": ["Energy", "Passion", "Transformation"],
        "rooms": ["Kitchen", "Dining Room", "Study"],
        "materials": ["Metal", "Copper", "Brass", "Stainless Steel"],
        "colors": ["Red", "Orange", "Pink", "Coral"],
        "remedies": ["Add fire elements", "Use red colors", "Place electrical appliances"],
    },
    {
        "name": "Air",
        "color": "White/Gray",
        "direction": "Northwest",
        "characteristics": ["Movement", "Vitality", "Communication"],
        "rooms": ["Living Room", "Balcony", "Study"],
        "materials": ["Wood", "Bamboo", "Light Fabrics"],
        "colors": ["White", "Gray", "Light Blue", "Silver"],
        "remedies": ["Improve ventilation", "Use light colors", "Add wind chimes"],
    },
    {
        "name": "Space",
        "color": "Purple/Violet",
        "direction": "Center",
        "characteristics": ["Balance", "Harmony", "Spirituality"],
        "rooms": ["Center of house", "Meditation room", "Puja room"],
        "materials": ["Open space", "Crystals", "Sacred objects"],
        "colors": ["Purple", "Violet", "Indigo", "Deep Blue"],
        "remedies": ["Keep center open", "Use purple colors", "Add spiritual elements"],
    },
]

DIRECTIONS_INFO = [
    {
        "name": "North",
        "element": "Water",
        "color": "Blue/Black",
        "deity": "Kubera",
        "characteristics": ["Wealth", "Career", "Opportunities"],
        "rooms": ["Study", "Office", "Storage"],
        "tips": ["Keep clean and organized", "Avoid heavy furniture", "Use blue colors"],
    },
    {
        "name": "South",
        "element": "Fire",
        "color": "Red/Orange",
        "deity": "Yama",
        "characteristics": ["Fame", "Recognition", "Reputation"],
        "rooms": ["Living Room", "Dining Room", "Guest Room"],
        "tips": ["Use red colors", "Avoid water features", "Keep well-lit"],
    },
    {
        "name": "East",
        "element": "Air",
        "color": "White/Gray",
        "deity": "Indra",
        "characteristics": ["Health", "Family", "New Beginnings"],
        "rooms": ["Main Door", "Living Room", "Study"],
        "tips": ["Keep open and airy", "Use light colors", "Avoid heavy furniture"],
    },
    {
        "name": "West",
        "element": "Air",
        "color": "White/Gray",
        "deity": "Varuna",
        "characteristics": ["Children", "Creativity", "Pleasure"],
        "rooms": ["Children Room", "Dining Room", "Balcony"],
        "tips": ["Use light colors", "Keep well-ventilated", "Avoid dark colors"],
    },
    {
        "name": "Northeast",
        "element": "Water",
        "color": "Blue/Black",
        "deity": "Ishaan",
        "characteristics": ["Spirituality", "Wisdom", "Knowledge"],
        "rooms": ["Puja Room", "Study", "Meditation Room"],
        "tips": ["Keep clean and pure", "Use blue colors", "Avoid kitchen or toilet"],
    },
    {
        "name": "Southeast",
        "element": "Fire",
        "color": "Red/Orange",
        "deity": "Agni",
        "characteristics": ["Energy", "Cooking", "Transformation"],
        "rooms": ["Kitchen", "Dining Room"],
        "tips": ["Use red colors", "Keep well-lit", "Avoid water features"],
    },
    {
        "name": "Southwest",
        "element": "Earth",
        "color": "Brown/Yellow",
        "deity": "Nairutya",
        "characteristics": ["Relationships", "Stability", "Grounding"],
        "rooms": ["Master Bedroom", "Storage", "Heavy Items"],
        "tips": ["Use earth colors", "Place heavy furniture", "Avoid water features"],
    },
    {
        "name": "Northwest",
        "element": "Air",
        "color": "White/Gray",
        "deity": "Vayu",
        "characteristics": ["Support", "Help", "Movement"],
        "rooms": ["Guest Room", "Children Room", "Balcony"],
        "tips": ["Keep light and airy", "Use light colors", "Avoid heavy items"],
    },
]

ROOM_GUIDELINES = {
    "bedroom": {
        "name": "Bedroom",
        "ideal_direction": "Southwest",
        "avoid_direction": "Northeast",
        "colors": ["Pink", "Light Blue", "Green", "White"],
        "avoid_colors": ["Red", "Black", "Dark Blue"],
        "furniture": [
            "Bed should face east or south",
            "Avoid mirrors facing bed",
            "Keep head towards south",
        ],
        "tips": ["Keep clean and organized", "Avoid electronics near bed", "Use soft lighting"],
    },
    "kitchen": {
        "name": "Kitchen",
        "ideal_direction": "Southeast",
        "avoid_direction": "Northeast",
        "colors": ["Yellow", "Orange", "Red", "White"],
        "avoid_colors": ["Blue", "Black", "Green"],
        "furniture": [
            "Stove should face east",
            "Sink should be in northeast",
            "Keep clean and organized",
        ],
        "tips": ["Keep well-lit", "Avoid clutter", "Use fire element colors"],
    },
    "living-room": {
        "name": "Living Room",
        "ideal_direction": "North or East",
        "avoid_direction": "Southwest",
        "colors": ["White", "Light Blue", "Green", "Yellow"],
        "avoid_colors": ["Red", "Black", "Dark colors"],
        "furniture": [
            "Seating should face north or east",
            "Avoid heavy furniture in center",
            "Keep open and airy",
        ],
        "tips": ["Keep well-ventilated", "Use light colors", "Avoid clutter"],
    },
    "bathroom": {
        "name": "Bathroom",
        "ideal_direction": "Northwest or West",
        "avoid_direction": "Northeast",
        "colors": ["White", "Light Blue", "Light Green"],
        "avoid_colors": ["Red", "Black", "Dark colors"],
        "furniture": [
            "Keep clean and organized",
            "Avoid mirrors facing door",
            "Use light colors",
        ],
        "tips": [
            "Keep well-ventilated",
            "Avoid keeping it in northeast",
            "Use white or light colors",
        ],
    },
    "study": {
        "name": "Study Room",
        "ideal_direction": "North or Northeast",
        "avoid_direction": "Southwest",
        "colors": ["White", "Light Blue", "Green", "Yellow"],
        "avoid_colors": ["Red", "Black", "Dark colors"],
        "furniture": [
            "Desk should face north or east",
            "Keep books organized",
            "Use proper lighting",
        ],
        "tips": ["Keep clean and organized", "Avoid distractions", "Use light colors"],
    },
}

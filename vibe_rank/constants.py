from __future__ import annotations

"""Built-in concept vocabulary.

Opposites are ordered: the first entry is the one shown on the left end of
a slider. Keys and values are lower-case concept ids.
"""

from typing import Dict, List

CATEGORIES: List[str] = [
    "all",
    "website",
    "packaging",
    "graphic",
    "logo",
    "brand",
]

CONCEPT_OPPOSITES: Dict[str, List[str]] = {
    "3d": ["flatness", "design"],
    "animated": ["static"],
    "art": ["corporate", "professional"],
    "artistic": ["corporate", "commercial", "advertising", "professional"],
    "asymmetrical": ["symmetrical", "balance", "centered", "static"],
    "authoritative": ["gentle", "calm", "muted", "pastel", "playful"],
    "bold": ["understated", "calm", "gentle", "muted", "pastel"],
    "brutalist": ["elegant", "organic", "serif"],
    "calm": ["chaotic", "energetic", "dramatic", "bold", "authoritative"],
    "casual": ["professional"],
    "chaotic": ["calm", "peaceful", "serene", "stability"],
    "colorful": ["monochrome", "colorless", "muted", "duotone", "dark"],
    "colorless": ["colorful", "vibrant"],
    "contemporary": ["vintage"],
    "cool": ["warm", "cozy", "inviting", "friendly", "energetic"],
    "corporate": ["playful", "artistic", "expressive", "handwritten"],
    "cozy": ["cool"],
    "dark": ["light", "colorful", "playful", "neon"],
    "deliberate": ["spontaneous", "accidental", "haphazard", "impulsive"],
    "dense": ["spacious", "minimal", "empty", "light"],
    "digital": ["photography", "brushstroke"],
    "dramatic": ["understated", "calm", "gentle", "muted", "pastel"],
    "elegant": ["brutalist", "gritty", "grotesque"],
    "energetic": ["calm", "peace", "muted", "pastel", "cool"],
    "experimental": ["traditional", "commercial"],
    "expressive": ["corporate", "professional", "muted", "pastel"],
    "fluid": ["geometric", "grid", "modular", "solid", "strict"],
    "friendly": ["aloof", "cool"],
    "futuristic": ["vintage", "retro", "old", "traditional"],
    "gentle": ["bold", "authoritative", "dramatic", "hard", "powerful"],
    "geometric": ["organic", "handwritten", "amorphous", "biomorphic"],
    "glossy": ["matte"],
    "gradient": ["solid", "grainy"],
    "grainy": ["smoothness", "gradient"],
    "grid": ["fluid", "freeform", "masonry", "organic", "handwritten"],
    "gritty": ["polish", "elegant", "sophisticated", "professional"],
    "handwritten": ["geometric", "grid", "corporate", "metallic"],
    "hard": ["soft", "gentle", "muted", "pastel"],
    "heavy": ["light", "calm", "serene", "peaceful"],
    "illustration": ["photography", "rendering"],
    "joy": ["melancholy", "somber", "dark"],
    "light": ["dark", "weighty", "abyss"],
    "luxurious": ["understated", "minimal"],
    "matte": ["glossy", "reflectivity"],
    "maximalist": ["minimal", "minimalistic", "understated"],
    "melancholy": ["joy", "playful", "exuberance"],
    "minimal": ["maximalist", "complexity", "luxurious", "premium"],
    "modern": ["vintage", "retro", "traditional", "old"],
    "modular": ["fluid", "organic", "monolithic", "integrated"],
    "monochrome": ["colorful", "vibrant"],
    "muted": ["vibrant", "bold", "colorful", "confident"],
    "neon": ["muted", "pastel", "understated", "dark"],
    "old": ["new", "modern", "futuristic"],
    "organic": ["geometric", "synthetic", "grid", "modular", "sterile"],
    "pastel": ["bold", "vibrant", "dramatic", "energetic"],
    "peaceful": ["chaotic", "energetic", "heavy", "vibrant"],
    "photography": ["illustration", "collage", "rendering"],
    "playful": ["corporate", "professional", "authoritative", "melancholy"],
    "professional": ["playful", "artistic", "expressive", "gritty"],
    "retro": ["futuristic", "modern", "new"],
    "serene": ["chaotic", "energetic", "heavy", "vibrant"],
    "serif": ["sans-serif", "modern", "brutalist"],
    "soft": ["hard", "brutalist", "angularity"],
    "solid": ["gradient", "fluid", "hollow"],
    "spacious": ["dense"],
    "static": ["animated", "kinetic", "fluid", "cinematic"],
    "strict": ["playful", "whimsical", "fluid", "organic"],
    "symmetrical": ["asymmetrical"],
    "synthetic": ["organic", "artisanal", "cottagecore"],
    "traditional": ["modern", "experimental", "startup", "new"],
    "understated": ["bold", "dramatic", "colorful", "brutalist"],
    "vibrant": ["muted", "monochrome", "pastel", "calm"],
    "vintage": ["modern", "futuristic", "contemporary", "new"],
    "warm": ["cool", "aloof"],
    "whimsical": ["corporate", "strict", "professional"],
}

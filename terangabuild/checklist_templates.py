"""Pre-built construction checklist templates.

Items are listed in execution order; applying a template creates one
checklist item per entry with sequential ``order_index`` values.
"""

# Pre-built templates for common project types
BUILTIN_TEMPLATES = {
    "villa": {
        "name": "Villa individuelle",
        "description": "Construction d'une maison individuelle, de l'étude au nettoyage de fin de chantier",
        "items": [
            {"title": "Étude de faisabilité", "description": "Analyse du terrain et étude de sol", "estimated_duration": 7, "priority": "high"},
            {"title": "Obtention du permis de construire", "description": "Dépôt et suivi du dossier en mairie", "estimated_duration": 30, "priority": "critical"},
            {"title": "Préparation du terrain", "description": "Nettoyage, terrassement et implantation", "estimated_duration": 5, "priority": "high"},
            {"title": "Fondations", "description": "Fouilles, ferraillage et coulage des semelles", "estimated_duration": 14, "priority": "critical"},
            {"title": "Structure béton", "description": "Poteaux, poutres et dalles", "estimated_duration": 30, "priority": "critical"},
            {"title": "Toiture", "description": "Charpente et couverture", "estimated_duration": 10, "priority": "high"},
            {"title": "Murs et cloisons", "description": "Élévation des murs en agglos", "estimated_duration": 21, "priority": "high"},
            {"title": "Électricité", "description": "Gaines, câblage et tableau électrique", "estimated_duration": 10, "priority": "high"},
            {"title": "Plomberie", "description": "Réseaux d'eau et sanitaires", "estimated_duration": 10, "priority": "high"},
            {"title": "Revêtements de sol", "description": "Carrelage et plinthes", "estimated_duration": 12, "priority": "medium"},
            {"title": "Peinture", "description": "Enduits et peinture intérieure et extérieure", "estimated_duration": 10, "priority": "medium"},
            {"title": "Finitions", "description": "Menuiseries, luminaires et nettoyage de fin de chantier", "estimated_duration": 7, "priority": "low"},
        ],
    },
    "immeuble": {
        "name": "Immeuble R+N",
        "description": "Bâtiment collectif ou commercial à plusieurs niveaux",
        "items": [
            {"title": "Études géotechniques", "description": "Sondages et rapport de sol", "estimated_duration": 14, "priority": "critical"},
            {"title": "Plans d'exécution", "description": "Plans béton armé validés par le bureau de contrôle", "estimated_duration": 30, "priority": "critical"},
            {"title": "Permis de construire", "description": "Dépôt et obtention de l'autorisation", "estimated_duration": 45, "priority": "critical"},
            {"title": "Terrassement et sous-sol", "description": "Excavation, blindage et parking souterrain", "estimated_duration": 30, "priority": "high"},
            {"title": "Fondations profondes", "description": "Pieux ou radier général", "estimated_duration": 30, "priority": "critical"},
            {"title": "Gros œuvre par niveau", "description": "Poteaux, voiles et planchers de chaque étage", "estimated_duration": 120, "priority": "critical"},
            {"title": "Étanchéité toiture-terrasse", "description": "Complexe d'étanchéité et protection", "estimated_duration": 14, "priority": "high"},
            {"title": "Corps d'état secondaires", "description": "Électricité, plomberie, climatisation et ascenseurs", "estimated_duration": 60, "priority": "high"},
            {"title": "Façades et menuiseries", "description": "Habillage de façade et pose des menuiseries extérieures", "estimated_duration": 30, "priority": "medium"},
            {"title": "Réception des travaux", "description": "Levée des réserves et remise des clés", "estimated_duration": 10, "priority": "high"},
        ],
    },
    "renovation": {
        "name": "Rénovation",
        "description": "Remise en état d'un bâtiment existant",
        "items": [
            {"title": "Diagnostic de l'existant", "description": "Relevé des désordres et état des réseaux", "estimated_duration": 5, "priority": "high"},
            {"title": "Démolition et dépose", "description": "Dépose des revêtements et cloisons à reprendre", "estimated_duration": 7, "priority": "medium"},
            {"title": "Reprise structurelle", "description": "Traitement des fissures et renforcements", "estimated_duration": 14, "priority": "critical"},
            {"title": "Mise aux normes des réseaux", "description": "Électricité et plomberie", "estimated_duration": 10, "priority": "high"},
            {"title": "Second œuvre", "description": "Enduits, carrelage et peinture", "estimated_duration": 14, "priority": "medium"},
            {"title": "Nettoyage et réception", "description": "Contrôle final avec le client", "estimated_duration": 2, "priority": "low"},
        ],
    },
}


def get_template(template_id: str) -> dict:
    """Return a built-in template.

    Raises:
        KeyError: If no template has this id
    """
    try:
        return BUILTIN_TEMPLATES[template_id]
    except KeyError:
        raise KeyError(f"Unknown checklist template '{template_id}'") from None

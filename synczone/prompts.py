SYSTEM = (
    "You are a meeting planning assistant. Reply with strict JSON that must "
    "validate against the provided schema."
)

USER_TEMPLATE = (
    "I am scheduling a meeting.\n"
    "Topic: {topic}\n"
    "Duration: {duration} minutes.\n\n"
    "My Time: {user_time} ({user_zone})\n"
    "Client Time: {client_time} ({client_zone})\n\n"
    "Please provide:\n"
    "1. A concise, professional meeting agenda with 3-5 bullet points suitable for this duration.\n"
    "2. A brief etiquette tip checking if this is a socially acceptable time for the client "
    "(e.g. is it too early or too late?).\n\n"
    "Return ONLY valid JSON with `agenda` and `etiquette_tip`."
)

FALLBACK_AGENDA = "Could not generate agenda. Please try again."
FALLBACK_ETIQUETTE_TIP = "Could not analyze time settings."

# Out parameters the manual forgets to badge.
OUTPUT_INSERTS = (
    ("FMOD_Studio_CommandReplay_GetSystem", "system"),
    ("FMOD_Studio_CommandReplay_GetCommandString", "buffer"),
    ("FMOD_Studio_CommandReplay_GetPaused", "paused"),
    ("FMOD_Studio_CommandReplay_GetUserData", "userdata"),
    ("FMOD_Studio_EventDescription_Is3D", "is3D"),
    ("FMOD_Studio_System_GetCoreSystem", "coresystem"),
    ("FMOD_System_GetNumNestedPlugins", "count"),
)

# Badged as output in the manual but passed by value.
REMOVALS = (
    ("FMOD_System_Set3DNumListeners", "numlisteners"),
    ("FMOD_Channel_GetMixMatrix", "inchannel_hop"),
    ("FMOD_ChannelGroup_GetMixMatrix", "inchannel_hop"),
)

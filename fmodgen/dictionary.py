# Rust strict, reserved and weak keywords that cannot be used as identifiers.
KEYWORDS = frozenset({
    "as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn", "for",
    "if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
    "self", "static", "struct", "super", "trait", "true", "type", "unsafe", "use", "where",
    "while", "async", "await", "dyn", "try", "abstract", "become", "box", "do", "final", "macro",
    "override", "priv", "typeof", "unsized", "virtual", "yield",
})

# PascalCase names whose word boundaries are lost in the all-caps C spelling.
RENAMES = {
    "3DAttributes": "Attributes3d",
    "Advancedsettings": "AdvancedSettings",
    "Asyncreadinfo": "AsyncReadInfo",
    "Channelcontrol": "ChannelControl",
    "Channelgroup": "ChannelGroup",
    "Channelorder": "ChannelOrder",
    "Commandreplay": "CommandReplay",
    "Createsoundexinfo": "CreateSoundExInfo",
    "Dspconnection": "DspConnection",
    "DspconnectionType": "DspConnectionType",
    "DspParameter3Dattributes": "DspParameter3DAttributes",
    "DspParameter3DattributesMulti": "DspParameter3DAttributesMulti",
    "ErrorcallbackInfo": "ErrorCallbackInfo",
    "Eventdescription": "EventDescription",
    "Eventinstance": "EventInstance",
    "Fmodresult": "FmodResult",
    "Openstate": "OpenState",
    "Outputtype": "OutputType",
    "Pluginlist": "PluginList",
    "Plugintype": "PluginType",
    "Soundgroup": "SoundGroup",
    "Soundtype": "SoundType",
    "Soundformat": "SoundFormat",
    "Speakermode": "SpeakerMode",
    "Studioadvancedsettings": "StudioAdvancedSettings",
    "Studiocpuusage": "StudioCpuUsage",
    "Studiosystem": "Studio",
    "Syncpoint": "SyncPoint",
    "Tagdatatype": "TagDataType",
    "Tagtype": "TagType",
    "Timeunit": "TimeUnit",
}

# Enumerators that share every word with their enumeration; the value is the
# final variant name.
ENUMERATOR_RENAMES = {
    "FMOD_STUDIO_LOAD_MEMORY": "Memory",
    "FMOD_STUDIO_LOAD_MEMORY_POINT": "MemoryPoint",
}

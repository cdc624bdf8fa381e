"""Hand-written wrapper methods that replace generated ones verbatim."""

from textwrap import dedent

_LOAD_BANK_MEMORY = dedent("""\
    pub fn load_bank_memory(&self, buffer: &[u8], flags: ffi::FMOD_STUDIO_LOAD_BANK_FLAGS) -> Result<Bank, Error> {
        unsafe {
            let mut bank = null_mut();
            match ffi::FMOD_Studio_System_LoadBankMemory(
                self.pointer,
                buffer.as_ptr() as *const std::os::raw::c_char,
                buffer.len() as std::os::raw::c_int,
                LoadMemoryMode::Memory.into(),
                flags,
                &mut bank,
            ) {
                ffi::FMOD_OK => Ok(Bank::from(bank)),
                error => Err(err_fmod!("FMOD_Studio_System_LoadBankMemory", error)),
            }
        }
    }""")


def _path_getter(function: str, method: str = "get_path", *, params: str = "", prep: str = "", lead: str = "") -> str:
    """Two-call string retrieval: ask for the length first, then fill a buffer of that size."""
    return dedent(f"""\
        pub fn {method}(&self{params}) -> Result<String, Error> {{
            unsafe {{
                let mut retrieved = i32::default();{prep}
                match ffi::{function}(self.pointer{lead}, null_mut(), 0, &mut retrieved) {{
                    ffi::FMOD_OK => {{
                        let mut buf = vec![0u8; retrieved as usize];
                        match ffi::{function}(self.pointer{lead}, buf.as_mut_ptr() as *mut _, retrieved, &mut retrieved) {{
                            ffi::FMOD_OK => Ok(CString::from_vec_with_nul_unchecked(buf).into_string().map_err(Error::String)?),
                            error => Err(err_fmod!("{function}", error)),
                        }}
                    }}
                    error => Err(err_fmod!("{function}", error)),
                }}
            }}
        }}""")


def _validity_check(function: str) -> str:
    return dedent(f"""\
        pub fn is_valid(&self) -> bool {{
            unsafe {{ to_bool!(ffi::{function}(self.pointer)) }}
        }}""")


def function_overrides() -> dict[str, str]:
    overrides = {"FMOD_Studio_System_LoadBankMemory": _LOAD_BANK_MEMORY}
    for owner in ("Bank", "Bus", "VCA", "EventDescription"):
        function = f"FMOD_Studio_{owner}_GetPath"
        overrides[function] = _path_getter(function)
    overrides["FMOD_Studio_System_LookupPath"] = _path_getter(
        "FMOD_Studio_System_LookupPath",
        "lookup_path",
        params=", id: Guid",
        prep="\n                let id = id.into();",
        lead=", &id",
    )
    for owner in ("System", "EventDescription", "EventInstance", "Bus", "VCA", "Bank", "CommandReplay"):
        function = f"FMOD_Studio_{owner}_IsValid"
        overrides[function] = _validity_check(function)
    return overrides

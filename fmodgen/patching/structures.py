from textwrap import dedent

DSP_PARAMETER_FFT = "FMOD_DSP_PARAMETER_FFT"

_FFT_FROM_DSP = dedent("""\
    impl TryFrom<Dsp> for DspParameterFft {
        type Error = Error;
        fn try_from(dsp: Dsp) -> Result<Self, Self::Error> {
            match dsp.get_type() {
                Ok(DspType::Fft) => {
                    let (ptr, _, _) = dsp.get_parameter_data(ffi::FMOD_DSP_FFT_SPECTRUMDATA, 0)?;
                    let fft = unsafe { *(ptr as *const ffi::FMOD_DSP_PARAMETER_FFT) };
                    DspParameterFft::from(fft)
                }
                _ => Err(Error::NotDspFft),
            }
        }
    }""")


def structure_patches() -> dict[str, str]:
    return {DSP_PARAMETER_FFT: _FFT_FROM_DSP}

from face_attendance.main import main

if __name__ == '__main__':
    main()
